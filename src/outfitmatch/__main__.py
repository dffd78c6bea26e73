from outfitmatch.cli import run

run()
