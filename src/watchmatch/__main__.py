from watchmatch.cli import app

app(prog_name="watchmatch")
