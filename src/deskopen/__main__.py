from deskopen.deskopen import main

main()
