"""Allow ``python -m mern_gen``."""

from mern_gen.pipeline import main

main()
