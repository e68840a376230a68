from readprep.cli.main import main

main()
