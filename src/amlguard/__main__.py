from amlguard.main import main

main()
