import sys

from twitch_recover.cli import main


sys.exit(main())
