from showroom import create_app

app = create_app()
