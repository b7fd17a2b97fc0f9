from wastems.main import run

run()
