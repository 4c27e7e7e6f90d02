from bridgex.main import main

main()
