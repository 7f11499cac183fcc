import sys

from maxos_builder.main import main


sys.exit(main())
