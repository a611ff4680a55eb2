from querybot.core.cli import main

main()
