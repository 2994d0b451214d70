from tab_morph.tmo_cli import run

run()
