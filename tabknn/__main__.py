import sys

from tabknn.main import main


sys.exit(main())
