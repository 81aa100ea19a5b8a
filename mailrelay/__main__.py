from mailrelay.runner import main

main()
