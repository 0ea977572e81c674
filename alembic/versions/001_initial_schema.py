"""001 – Initial schema: tabular store tables, indexes, constraints.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-06 10:00:00.000000+05:30
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# Every table carries the same row bookkeeping: a surrogate id and the
# version used for optimistic concurrency on cell updates.
ROW = """
        id          SERIAL PRIMARY KEY,
        version     INTEGER NOT NULL DEFAULT 1,"""


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── 1. employees ──────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE employees ({ROW}
            emp_id              VARCHAR(50)  NOT NULL UNIQUE,
            name                VARCHAR(200) NOT NULL,
            email               VARCHAR(255) NOT NULL UNIQUE,
            role                VARCHAR(20)  NOT NULL DEFAULT 'EMPLOYEE',
            department          VARCHAR(100),
            designation         VARCHAR(100),
            doj                 DATE,
            dob                 DATE,
            mobile              VARCHAR(15),
            status              VARCHAR(20)  NOT NULL DEFAULT 'Active',
            bal_cl              NUMERIC(8,2) NOT NULL DEFAULT 0,
            bal_sl              NUMERIC(8,2) NOT NULL DEFAULT 0,
            bal_mat             NUMERIC(8,2) NOT NULL DEFAULT 0,
            bal_pat             NUMERIC(8,2) NOT NULL DEFAULT 0,
            last_balance_update DATE,
            manager_id          VARCHAR(50)
        )
    """)
    op.execute("CREATE INDEX ix_employees_email ON employees (email)")
    op.execute("CREATE INDEX ix_employees_manager_id ON employees (manager_id)")

    # ── 2. leave_requests ─────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE leave_requests ({ROW}
            request_id    VARCHAR(40)  NOT NULL UNIQUE,
            emp_id        VARCHAR(50)  NOT NULL,
            name          VARCHAR(200),
            leave_type    VARCHAR(100) NOT NULL,
            start_date    DATE         NOT NULL,
            end_date      DATE         NOT NULL,
            reason        TEXT,
            status        VARCHAR(20)  NOT NULL DEFAULT 'Pending',
            days          NUMERIC(6,2) NOT NULL,
            session       VARCHAR(20)  NOT NULL DEFAULT 'Full Day',
            created_at    TIMESTAMPTZ  NOT NULL DEFAULT now(),
            decided_by    VARCHAR(255),
            decided_at    TIMESTAMPTZ,
            decision_note TEXT
        )
    """)
    op.execute("CREATE INDEX ix_leave_requests_emp_status ON leave_requests (emp_id, status)")

    # ── 3. job_runs ───────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE job_runs ({ROW}
            job         VARCHAR(50) NOT NULL,
            run_date    DATE        NOT NULL,
            finished_at TIMESTAMPTZ,
            summary     TEXT,
            CONSTRAINT uq_job_runs_job_date UNIQUE (job, run_date)
        )
    """)

    # ── 4. attendance ─────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE attendance ({ROW}
            punch_date DATE         NOT NULL,
            emp_id     VARCHAR(50)  NOT NULL,
            name       VARCHAR(200),
            punch_type VARCHAR(20)  NOT NULL,
            punch_time TIME         NOT NULL,
            lat        DOUBLE PRECISION,
            lng        DOUBLE PRECISION,
            map_link   VARCHAR(255),
            device     VARCHAR(255)
        )
    """)
    op.execute("CREATE INDEX ix_attendance_emp_date ON attendance (emp_id, punch_date)")

    # ── 5. holidays ───────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE holidays ({ROW}
            holiday_date DATE         NOT NULL UNIQUE,
            title        VARCHAR(150) NOT NULL,
            holiday_type VARCHAR(50)  NOT NULL DEFAULT 'Public'
        )
    """)

    # ── 6. announcements ──────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE announcements ({ROW}
            posted_at TIMESTAMPTZ  NOT NULL DEFAULT now(),
            title     VARCHAR(255) NOT NULL,
            message   TEXT         NOT NULL,
            posted_by VARCHAR(255)
        )
    """)

    # ── 7. assets ─────────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE assets ({ROW}
            asset_id    VARCHAR(40)  NOT NULL UNIQUE,
            asset_type  VARCHAR(100) NOT NULL,
            model       VARCHAR(200),
            serial_no   VARCHAR(100),
            assigned_to VARCHAR(50),
            status      VARCHAR(20)  NOT NULL DEFAULT 'Available'
        )
    """)

    # ── 8. payslips ───────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE payslips ({ROW}
            payslip_id VARCHAR(40)   NOT NULL UNIQUE,
            emp_id     VARCHAR(50)   NOT NULL,
            month      VARCHAR(20)   NOT NULL,
            year       INTEGER       NOT NULL,
            net_pay    NUMERIC(12,2) NOT NULL,
            gen_date   DATE          NOT NULL,
            file_url   VARCHAR(500)
        )
    """)
    op.execute("CREATE INDEX ix_payslips_emp_id ON payslips (emp_id)")

    # ── 9. documents ──────────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE documents ({ROW}
            doc_id        VARCHAR(40)  NOT NULL UNIQUE,
            emp_id        VARCHAR(50)  NOT NULL,
            document_type VARCHAR(100) NOT NULL,
            file_name     VARCHAR(255) NOT NULL,
            file_url      VARCHAR(500) NOT NULL,
            upload_date   TIMESTAMPTZ  NOT NULL DEFAULT now()
        )
    """)

    # ── 10. document_templates ────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE document_templates ({ROW}
            template_id VARCHAR(40)  NOT NULL UNIQUE,
            title       VARCHAR(255) NOT NULL,
            content     TEXT         NOT NULL
        )
    """)

    # ── 11. generated_documents ───────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE generated_documents ({ROW}
            generated_doc_id VARCHAR(40)  NOT NULL UNIQUE,
            template_id      VARCHAR(40)  NOT NULL,
            emp_id           VARCHAR(50)  NOT NULL,
            status           VARCHAR(20)  NOT NULL DEFAULT 'Pending',
            created_date     TIMESTAMPTZ  NOT NULL DEFAULT now(),
            approved_date    TIMESTAMPTZ,
            approved_by      VARCHAR(255),
            data             JSON         NOT NULL DEFAULT '{{}}',
            file_url         VARCHAR(500)
        )
    """)

    # ── 12. notification_outbox ───────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE notification_outbox ({ROW}
            to_address VARCHAR(255) NOT NULL,
            subject    VARCHAR(255) NOT NULL,
            html_body  TEXT         NOT NULL,
            status     VARCHAR(20)  NOT NULL DEFAULT 'queued',
            attempts   INTEGER      NOT NULL DEFAULT 0,
            last_error TEXT,
            created_at TIMESTAMPTZ  NOT NULL DEFAULT now(),
            sent_at    TIMESTAMPTZ
        )
    """)
    op.execute("CREATE INDEX ix_notification_outbox_status ON notification_outbox (status)")

    # ── 13. system_logs ───────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE system_logs ({ROW}
            logged_at  TIMESTAMPTZ  NOT NULL DEFAULT now(),
            user_email VARCHAR(255) NOT NULL,
            action     VARCHAR(100) NOT NULL,
            details    TEXT,
            meta       VARCHAR(255)
        )
    """)
    op.execute("CREATE INDEX ix_system_logs_logged_at ON system_logs (logged_at)")
    op.execute("CREATE INDEX ix_system_logs_action ON system_logs (action)")

    # ── 14. app_settings ──────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE app_settings ({ROW}
            setting VARCHAR(100) NOT NULL UNIQUE,
            value   TEXT
        )
    """)


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    tables = [
        "app_settings",
        "system_logs",
        "notification_outbox",
        "generated_documents",
        "document_templates",
        "documents",
        "payslips",
        "assets",
        "announcements",
        "holidays",
        "attendance",
        "job_runs",
        "leave_requests",
        "employees",
    ]
    for t in tables:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")
