from zyra.cli import app

app()
