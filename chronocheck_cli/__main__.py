from chronocheck_cli.commands import main

main()
