from no_unsafe_any.cli.app import main

main()
