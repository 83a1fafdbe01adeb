from serialconsole import main

main()
