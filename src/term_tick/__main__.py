from .cli import main

main(prog_name="term-tick")
