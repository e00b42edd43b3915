import os

from app import create_app

app = create_app()


@app.shell_context_processor
def make_shell_context():
    from app.models import ParticipantRecord, PickSummary, PlayerStanding
    from app.utils import standings

    return {
        "ParticipantRecord": ParticipantRecord,
        "PickSummary": PickSummary,
        "PlayerStanding": PlayerStanding,
        "standings": standings,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=app.debug)
