"""python -m casino 入口"""

from casino.ui.cli import main

if __name__ == "__main__":
    main()
