from gamewizard.cli import app

app(prog_name='gamewizard')
