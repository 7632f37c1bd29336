"""m2_transactions_immutable_amounts

Revision ID: 7c3d9e1f2a58
Revises: 5b1e7c2a9d40
Create Date: 2026-10-19 09:30:00.000000
"""

from collections.abc import Sequence

from alembic import op

revision: str = "7c3d9e1f2a58"
down_revision: str | None = "5b1e7c2a9d40"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    # Only status (pending -> completed/failed), message_id and updated_at may change.
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_transactions_guard()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF TG_OP = 'DELETE' THEN
                RAISE EXCEPTION 'transactions cannot be deleted';
            END IF;
            IF NEW.amount IS DISTINCT FROM OLD.amount
               OR NEW.transaction_type IS DISTINCT FROM OLD.transaction_type
               OR NEW.sender_id IS DISTINCT FROM OLD.sender_id
               OR NEW.receiver_id IS DISTINCT FROM OLD.receiver_id
               OR NEW.idempotency_key IS DISTINCT FROM OLD.idempotency_key
               OR NEW.created_at IS DISTINCT FROM OLD.created_at THEN
                RAISE EXCEPTION 'transactions are immutable';
            END IF;
            IF NEW.status IS DISTINCT FROM OLD.status AND OLD.status <> 'pending' THEN
                RAISE EXCEPTION 'transaction status is final';
            END IF;
            RETURN NEW;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_transactions_guard
        BEFORE UPDATE OR DELETE ON transactions
        FOR EACH ROW
        EXECUTE FUNCTION fn_transactions_guard();
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_transactions_guard ON transactions;")
    op.execute("DROP FUNCTION IF EXISTS fn_transactions_guard();")
