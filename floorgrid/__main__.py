from floorgrid.cli import main

main()
