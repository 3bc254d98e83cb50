from sockpeek.cli import main

raise SystemExit(main())
