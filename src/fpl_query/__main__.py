from fpl_query.server import main

main()
