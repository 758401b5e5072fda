from chartdriver.cli import main

main()
