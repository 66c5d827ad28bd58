"""Package entry point for ``python -m udpipe_converter``.

WHY: Users run the converter as ``python -m udpipe_converter doc.txt``
to annotate text files, or pass ``.conllu`` files to reshape existing
annotation output.

HOW: Delegates to the CLI's main() function.
"""

from udpipe_converter.cli import main

if __name__ == "__main__":
    main()
