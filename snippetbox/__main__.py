from snippetbox.cli import main

main()
