from tmux_tutorial.cli import main

raise SystemExit(main())
