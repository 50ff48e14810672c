from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
    CREATE TABLE IF NOT EXISTS users (
      id SERIAL PRIMARY KEY,
      name TEXT NOT NULL,
      email TEXT NOT NULL UNIQUE,
      password_hash TEXT NOT NULL,
      role TEXT NOT NULL DEFAULT 'donor' CHECK (role IN ('donor', 'admin')),
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );

    CREATE TABLE IF NOT EXISTS campaigns (
      id SERIAL PRIMARY KEY,
      title TEXT NOT NULL,
      description TEXT,
      goal_amount NUMERIC(12,2) NOT NULL CHECK (goal_amount > 0),
      raised_amount NUMERIC(12,2) NOT NULL DEFAULT 0,
      image_url TEXT,
      category TEXT,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );

    CREATE INDEX IF NOT EXISTS idx_campaigns_created ON campaigns(created_at DESC);
    CREATE INDEX IF NOT EXISTS idx_campaigns_category ON campaigns(category);

    CREATE TABLE IF NOT EXISTS donations (
      id SERIAL PRIMARY KEY,
      user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
      campaign_id INTEGER NOT NULL REFERENCES campaigns(id) ON DELETE RESTRICT,
      amount NUMERIC(12,2) NOT NULL CHECK (amount > 0),
      payment_status TEXT NOT NULL DEFAULT 'pending'
        CHECK (payment_status IN ('pending', 'completed', 'failed')),
      stripe_session_id TEXT UNIQUE,
      idempotency_key TEXT,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      CONSTRAINT uq_donations_user_idempotency UNIQUE (user_id, idempotency_key)
    );

    CREATE INDEX IF NOT EXISTS idx_donations_user ON donations(user_id, created_at);
    CREATE INDEX IF NOT EXISTS idx_donations_campaign ON donations(campaign_id);
    """
    )


def downgrade():
    op.execute(
        """
    DROP TABLE IF EXISTS donations;
    DROP TABLE IF EXISTS campaigns;
    DROP TABLE IF EXISTS users;
    """
    )
