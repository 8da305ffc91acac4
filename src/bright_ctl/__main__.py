from bright_ctl.cli import main

raise SystemExit(main())
