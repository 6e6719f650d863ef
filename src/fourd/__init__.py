# SPDX-License-Identifier: MIT

from fourd.initialize import initialize
from fourd.terminal.app import run


def main() -> None:
    initialize()
    run()


if __name__ == "__main__":
    main()
