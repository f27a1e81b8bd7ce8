from casino import db
from casino.models import BettingLimit, Game, PaymentMethod, Player, ScratchTicketDesign, StorePack
from casino.services.limits import GAME_TYPES


def test_db_reset_seeds_sample_data(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['db-reset'])
    assert result.exit_code == 0, result.output
    assert 'reset and seeded' in result.output

    db.session.remove()
    assert Player.query.filter_by(role='player').count() == 5
    assert Player.query.filter_by(role='admin').count() == 1
    assert Game.query.count() == 5
    assert StorePack.query.count() == 3
    assert PaymentMethod.query.count() == 3
    assert ScratchTicketDesign.query.count() == 2
    assert {row.game_type for row in BettingLimit.query.all()} == set(GAME_TYPES)


def test_seeded_admin_can_log_in(flask_app):
    flask_app.test_cli_runner().invoke(args=['db-reset'])
    res = flask_app.test_client().post('/api/admin/login', json={
        'email': flask_app.config['ADMIN_EMAIL'], 'password': flask_app.config['ADMIN_PASSWORD'],
    })
    assert res.status_code == 200
    assert res.get_json()['admin']['role'] == 'admin'
