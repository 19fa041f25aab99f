from wikipath.cli import main

raise SystemExit(main())
