from fuzdur.cli import main

raise SystemExit(main())
