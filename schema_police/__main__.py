from schema_police.main import run

run()
