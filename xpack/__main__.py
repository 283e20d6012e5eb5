from xpack.cli.app import main

main()
