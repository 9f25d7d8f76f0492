from contact_store.cli import main

main()
