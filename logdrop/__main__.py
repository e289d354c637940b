from logdrop.main import main

main()
