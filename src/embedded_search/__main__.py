from embedded_search.cli import main


raise SystemExit(main())
