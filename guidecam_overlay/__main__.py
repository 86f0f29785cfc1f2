from guidecam_overlay.launcher import main

raise SystemExit(main())
