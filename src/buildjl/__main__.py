from buildjl.main import main

main()
