from plantnet.app_setup.factory import create_app

# App globale (les collaborateurs sont construits au démarrage par le lifespan)
app = create_app()
