import sys

from git_worktree_keeper.cli.main import main

sys.exit(main())
