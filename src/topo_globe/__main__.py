from topo_globe.server import main

main()
