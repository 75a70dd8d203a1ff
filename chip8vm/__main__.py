import sys

from chip8vm.app import main

if __name__ == "__main__":
    sys.exit(main())
