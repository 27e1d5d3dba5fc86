"""initial portal schema

Revision ID: 3c8e1a7d2b90
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c8e1a7d2b90'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'userinfo',
        sa.Column('email', sa.String(length=255), primary_key=True),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('userrole', sa.Enum('student', 'admin', name='user_role'), nullable=False, server_default='student'),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
    )

    op.create_table(
        'savedroutine',
        sa.Column('routineid', sa.String(length=36), primary_key=True),
        sa.Column('routinestr', sa.Text(), nullable=False),
        sa.Column('routinename', sa.Text(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(['email'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
    )
    op.create_index('ix_savedroutine_email', 'savedroutine', ['email'])

    op.create_table(
        'savedmergedroutine',
        sa.Column('routineid', sa.String(length=36), primary_key=True),
        sa.Column('routinedata', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(['email'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
    )
    op.create_index('ix_savedmergedroutine_email', 'savedmergedroutine', ['email'])

    op.create_table(
        'courseswap',
        sa.Column('swapid', sa.String(length=36), primary_key=True),
        sa.Column('isdone', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('uemail', sa.String(length=255), nullable=False),
        sa.Column('getsectionid', sa.Integer(), nullable=False),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.Column('semester', sa.String(length=16), nullable=True),
        sa.ForeignKeyConstraint(['uemail'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
    )
    op.create_index('ix_courseswap_uemail', 'courseswap', ['uemail'])

    op.create_table(
        'asksectionid',
        sa.Column('swapid', sa.String(length=36), nullable=False),
        sa.Column('asksectionid', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['swapid'], ['courseswap.swapid'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('swapid', 'asksectionid'),
    )

    op.create_table(
        'swaprequest',
        sa.Column('requestid', sa.String(length=36), primary_key=True),
        sa.Column('swapid', sa.String(length=36), nullable=False),
        sa.Column('senderemail', sa.String(length=255), nullable=False),
        sa.Column('receiveremail', sa.String(length=255), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', name='swaprequest_status'), nullable=False, server_default='PENDING'),
        sa.Column('isread', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.ForeignKeyConstraint(['swapid'], ['courseswap.swapid'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['senderemail'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['receiveremail'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
    )
    op.create_index('ix_swaprequest_swapid', 'swaprequest', ['swapid'])
    op.create_index('ix_swaprequest_senderemail', 'swaprequest', ['senderemail'])
    op.create_index('ix_swaprequest_receiveremail', 'swaprequest', ['receiveremail'])

    op.create_table(
        'faculty',
        sa.Column('facultyid', sa.String(length=36), primary_key=True),
        sa.Column('facultyname', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('imgurl', sa.Text(), nullable=True),
    )

    op.create_table(
        'initial',
        sa.Column('facultyid', sa.String(length=36), nullable=False),
        sa.Column('facultyinitial', sa.String(length=32), nullable=False),
        sa.ForeignKeyConstraint(['facultyid'], ['faculty.facultyid'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('facultyid', 'facultyinitial'),
    )
    op.create_index('ix_initial_facultyid', 'initial', ['facultyid'])

    op.create_table(
        'reviews',
        sa.Column('reviewid', sa.String(length=36), primary_key=True),
        sa.Column('facultyid', sa.String(length=36), nullable=False),
        sa.Column('uemail', sa.String(length=255), nullable=False, server_default='deleted@g.bracu.ac.bd'),
        sa.Column('isanon', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.Column('behaviourrating', sa.Integer(), nullable=False),
        sa.Column('teachingrating', sa.Integer(), nullable=False),
        sa.Column('markingrating', sa.Integer(), nullable=False),
        sa.Column('section', sa.String(length=16), nullable=False),
        sa.Column('coursecode', sa.String(length=16), nullable=False),
        sa.Column('reviewdescription', sa.Text(), nullable=True),
        sa.Column('poststate', sa.Enum('pending', 'published', 'rejected', name='review_state'), nullable=False, server_default='pending'),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.ForeignKeyConstraint(['facultyid'], ['faculty.facultyid'], ondelete='CASCADE', onupdate='CASCADE'),
    )
    op.create_index('ix_reviews_uemail', 'reviews', ['uemail'])

    op.create_table(
        'coursematerials',
        sa.Column('materialid', sa.String(length=36), primary_key=True),
        sa.Column('uemail', sa.String(length=255), nullable=True, server_default='deleted@g.bracu.ac.bd'),
        sa.Column('materialurl', sa.Text(), nullable=False),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.Column('coursecode', sa.String(length=16), nullable=False),
        sa.Column('semester', sa.String(length=16), nullable=False),
        sa.Column('poststate', sa.Enum('pending', 'published', 'rejected', name='post_state'), nullable=False, server_default='pending'),
        sa.Column('postdescription', sa.Text(), nullable=False),
    )
    op.create_index('ix_coursematerials_uemail', 'coursematerials', ['uemail'])

    op.create_table(
        'targets',
        sa.Column('uuid', sa.String(length=36), primary_key=True),
        sa.Column('kind', sa.String(length=32), nullable=False),
        sa.Column('refid', sa.String(length=36), nullable=False),
        sa.UniqueConstraint('refid', name='uq_targets_refid'),
    )

    op.create_table(
        'votes',
        sa.Column('uemail', sa.String(length=255), nullable=False),
        sa.Column('targetuuid', sa.String(length=36), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.Column('createdat', sa.BigInteger(), nullable=True),
        sa.ForeignKeyConstraint(['uemail'], ['userinfo.email'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['targetuuid'], ['targets.uuid'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('uemail', 'targetuuid'),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('message', sa.String(length=1000), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table('services')
    op.drop_table('votes')
    op.drop_table('targets')
    op.drop_table('coursematerials')
    op.drop_table('reviews')
    op.drop_table('initial')
    op.drop_table('faculty')
    op.drop_table('swaprequest')
    op.drop_table('asksectionid')
    op.drop_table('courseswap')
    op.drop_table('savedmergedroutine')
    op.drop_table('savedroutine')
    op.drop_table('userinfo')
