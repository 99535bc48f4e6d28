from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, payout_dispatcher=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    # Refuse to start with a fee schedule that could overpay or go negative
    from tictac.services.matches.settlement import FeeSchedule
    FeeSchedule.from_config(flask_app.config)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Payout dispatcher is owned by the app; routes reach it through extensions
    if payout_dispatcher is None:
        from tictac.services.matches.payouts import LedgerPayoutDispatcher
        payout_dispatcher = LedgerPayoutDispatcher(treasury_wallet=flask_app.config.get('TREASURY_WALLET'))
    flask_app.extensions['payouts'] = payout_dispatcher

    from tictac.main import main
    flask_app.register_blueprint(main)

    from tictac.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    from tictac.api.treasury import treasury
    flask_app.register_blueprint(treasury, url_prefix='/api/treasury')

    # Register Socket.IO event handlers
    from tictac.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import tictac.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            click.echo('Database has been reset!')

    @click.command('settlement-preview')
    @click.option('--stake', type=click.IntRange(min=0), required=True, help='Stake per party in the smallest unit.')
    @click.option('--outcome', type=click.Choice(['win', 'draw']), default='win', show_default=True)
    def settlement_preview_command(stake, outcome):
        """Prints the fee and payouts for a stake under the configured schedule."""
        from tictac.services.matches.settlement import DRAW, WINNER_DECIDED, FeeSchedule, compute_payouts
        schedule = FeeSchedule.from_config(flask_app.config)
        result = compute_payouts(stake, WINNER_DECIDED if outcome == 'win' else DRAW, schedule)
        for key, value in result.to_dict().items():
            if value is not None:
                click.echo(f'{key}: {value}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(settlement_preview_command)

    return flask_app
