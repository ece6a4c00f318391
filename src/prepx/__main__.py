from prepx.cli import main

raise SystemExit(main())
