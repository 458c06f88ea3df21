from mfaqr.cli import main

raise SystemExit(main())
