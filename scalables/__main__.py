"""
CLI entry point, when used as a module: `python -m scalables`.
"""
from scalables import cli

if __name__ == '__main__':
    cli.main()
