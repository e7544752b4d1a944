from agrirent import create_app, db
from agrirent.models import Profile, Equipment, Booking, ActivityLog

app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'Profile': Profile,
        'Equipment': Equipment,
        'Booking': Booking,
        'ActivityLog': ActivityLog
    }

if __name__ == '__main__':
    app.run(debug=True)
