import sys

from fpga_jit_runner.cli import main

sys.exit(main())
