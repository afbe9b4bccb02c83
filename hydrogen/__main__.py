from hydrogen.main import main

main()
