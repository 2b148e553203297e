from cherry.cli.app import main

main()
