# Overview: Flask extension instances for the ledger, database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from .ledger import ShowroomLedger

db = SQLAlchemy()
migrate = Migrate()
ledger = ShowroomLedger()
