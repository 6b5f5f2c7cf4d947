"""initial schema

Revision ID: 5c1f0a7e2b91
Revises:
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5c1f0a7e2b91'
down_revision = None
branch_labels = None
depends_on = None

MACHINE_STATUSES = "'active','has problems','under maintenance','inactive'"
TICKET_STATUSES = "'pending','in progress','late','completed','completed late'"
INTERVAL_TYPES = "'daily','weekly','monthly','semi','annually','custom'"


def upgrade():
    op.create_table(
        'AppUser',
        sa.Column('UserID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('Username', sa.String(50), nullable=False, unique=True),
        sa.Column('HashedPassword', sa.String(255), nullable=False),
        sa.Column('FirstName', sa.String(100), nullable=False),
        sa.Column('LastName', sa.String(100), nullable=False),
        sa.Column('Email', sa.String(200), nullable=False, unique=True),
        sa.Column('IsAdmin', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('TicketPermissions', sa.Boolean(), nullable=False, server_default=sa.text('0')),
    )
    op.create_table(
        'PasswordResetCode',
        sa.Column('CodeID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('UserID', sa.Integer(), sa.ForeignKey('AppUser.UserID', ondelete='CASCADE'), nullable=False),
        sa.Column('Code', sa.String(12), nullable=False),
        sa.Column('CreatedAt', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('ExpiresAt', sa.DateTime(), nullable=False),
        sa.Column('Used', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('Attempts', sa.Integer(), nullable=False, server_default=sa.text('0')),
    )
    op.create_table(
        'Supplier',
        sa.Column('SupplierID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('Website', sa.String(300)),
        sa.Column('Email', sa.String(200)),
        sa.Column('PhoneNumber', sa.String(50)),
    )
    op.create_table(
        'MachineGroup',
        sa.Column('MachineGroupID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('Description', sa.String(1000)),
        sa.Column('SupplierID', sa.Integer(), sa.ForeignKey('Supplier.SupplierID', ondelete='SET NULL')),
        sa.Column('HasAccessories', sa.Boolean(), nullable=False, server_default=sa.text('0')),
    )
    op.create_table(
        'Machine',
        sa.Column('MachineID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('Description', sa.String(1000)),
        sa.Column('Location', sa.String(200), nullable=False),
        sa.Column('SAPNumber', sa.String(50), nullable=False, unique=True),
        sa.Column('SerialNumber', sa.String(100), nullable=False, unique=True),
        sa.Column('UserID', sa.Integer(), sa.ForeignKey('AppUser.UserID', ondelete='SET NULL')),
        sa.Column('Status_s', sa.String(30), nullable=False, server_default=sa.text("'active'")),
        sa.Column('SupplierID', sa.Integer(), sa.ForeignKey('Supplier.SupplierID', ondelete='SET NULL')),
        sa.Column('HasGenericAccessories', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('HasSpecialAccessories', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('MachineGroupID', sa.Integer(), sa.ForeignKey('MachineGroup.MachineGroupID', ondelete='SET NULL')),
        sa.Column('MachineClass', sa.String(50)),
        sa.CheckConstraint(f"Status_s in ({MACHINE_STATUSES})", name='CK_Machine_Status'),
    )
    op.create_table(
        'MachineCategory',
        sa.Column('CategoryID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE'), nullable=False),
        sa.Column('Name', sa.String(200), nullable=False),
    )
    op.create_table(
        'SpecialAccessory',
        sa.Column('AccessoryID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE')),
        sa.Column('MachineGroupID', sa.Integer(), sa.ForeignKey('MachineGroup.MachineGroupID', ondelete='SET NULL')),
        sa.Column('QualificationDate', sa.DateTime()),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('Length', sa.Integer()),
        sa.Column('Diameter', sa.Integer()),
        sa.Column('Angle', sa.Integer()),
        sa.Column('Quantity', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('Notes', sa.String(1000)),
    )
    op.create_table(
        'GenericAccessory',
        sa.Column('AccessoryID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE')),
        sa.Column('MachineGroupID', sa.Integer(), sa.ForeignKey('MachineGroup.MachineGroupID', ondelete='SET NULL')),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('Quantity', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('Notes', sa.String(1000)),
    )
    op.create_table(
        'MachineDocument',
        sa.Column('DocumentID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE')),
        sa.Column('MachineGroupID', sa.Integer(), sa.ForeignKey('MachineGroup.MachineGroupID', ondelete='SET NULL')),
        sa.Column('DocumentName', sa.String(300), nullable=False),
        sa.Column('DocumentType', sa.String(20)),
        sa.Column('DocumentPath', sa.String(1000), nullable=False),
    )
    op.create_table(
        'Checklist',
        sa.Column('ChecklistID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE')),
        sa.Column('MachineGroupID', sa.Integer(), sa.ForeignKey('MachineGroup.MachineGroupID', ondelete='SET NULL')),
        sa.Column('Title', sa.String(200), nullable=False),
        sa.Column('IntervalType', sa.String(20), nullable=False),
        sa.Column('CustomIntervalDays', sa.Integer()),
        sa.Column('CreatedAt', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('UpdatedAt', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('LastPerformedDate', sa.DateTime()),
        sa.Column('NextPlannedDate', sa.DateTime()),
        sa.Column('Status_s', sa.String(20)),
        sa.CheckConstraint(f"IntervalType in ({INTERVAL_TYPES})", name='CK_Checklist_Interval'),
    )
    op.create_table(
        'ChecklistItem',
        sa.Column('ItemID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ChecklistID', sa.Integer(), sa.ForeignKey('Checklist.ChecklistID', ondelete='CASCADE')),
        sa.Column('Description', sa.String(500), nullable=False),
        sa.Column('Completed', sa.Boolean(), nullable=False, server_default=sa.text('0')),
    )
    op.create_table(
        'ChecklistCompletion',
        sa.Column('CompletionID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ChecklistID', sa.Integer(), sa.ForeignKey('Checklist.ChecklistID', ondelete='SET NULL')),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='SET NULL')),
        sa.Column('UserID', sa.Integer(), sa.ForeignKey('AppUser.UserID', ondelete='SET NULL')),
        sa.Column('CompletionDate', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('Notes', sa.String(1000)),
        sa.Column('Status_s', sa.String(20)),
    )
    op.create_table(
        'ChecklistItemCompletion',
        sa.Column('ItemCompletionID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('CompletionID', sa.Integer(), sa.ForeignKey('ChecklistCompletion.CompletionID', ondelete='CASCADE')),
        sa.Column('ItemID', sa.Integer(), sa.ForeignKey('ChecklistItem.ItemID', ondelete='CASCADE')),
        sa.Column('Completed', sa.Boolean(), nullable=False, server_default=sa.text('0')),
    )
    op.create_table(
        'MaintenanceTicket',
        sa.Column('TicketID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='SET NULL')),
        sa.Column('UserID', sa.Integer(), sa.ForeignKey('AppUser.UserID', ondelete='SET NULL')),
        sa.Column('Title', sa.String(200), nullable=False),
        sa.Column('Description', sa.String(2000), nullable=False),
        sa.Column('Status_s', sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column('CompletionNotes', sa.String(2000)),
        sa.Column('ScheduledDate', sa.DateTime(), nullable=False),
        sa.Column('CompletedDate', sa.DateTime()),
        sa.Column('CreatedAt', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('UpdatedAt', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('Critical', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('CategoryID', sa.Integer(), sa.ForeignKey('MachineCategory.CategoryID', ondelete='SET NULL')),
        sa.Column('InterventionExternal', sa.Boolean()),
        sa.CheckConstraint(f"Status_s in ({TICKET_STATUSES})", name='CK_Ticket_Status'),
    )
    op.create_table(
        'SparePart',
        sa.Column('SparePartID', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('MachineID', sa.Integer(), sa.ForeignKey('Machine.MachineID', ondelete='CASCADE')),
        sa.Column('Name', sa.String(200), nullable=False),
        sa.Column('PartNumber', sa.String(100), nullable=False, unique=True),
        sa.Column('Quantity', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('ReorderLevel', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('Location', sa.String(200)),
        sa.Column('Supplier', sa.String(200)),
        sa.CheckConstraint("Quantity >= 0", name='CK_SparePart_Quantity'),
    )

    # Sık kullanılan filtreler
    op.create_index('IX_Ticket_Machine_Status', 'MaintenanceTicket', ['MachineID', 'Status_s'])
    op.create_index('IX_Ticket_Scheduled', 'MaintenanceTicket', ['ScheduledDate'])
    op.create_index('IX_Checklist_NextPlanned', 'Checklist', ['NextPlannedDate'])
    op.create_index('IX_Document_Machine', 'MachineDocument', ['MachineID'])


def downgrade():
    op.drop_index('IX_Document_Machine', table_name='MachineDocument')
    op.drop_index('IX_Checklist_NextPlanned', table_name='Checklist')
    op.drop_index('IX_Ticket_Scheduled', table_name='MaintenanceTicket')
    op.drop_index('IX_Ticket_Machine_Status', table_name='MaintenanceTicket')
    for table in (
        'SparePart', 'MaintenanceTicket', 'ChecklistItemCompletion', 'ChecklistCompletion',
        'ChecklistItem', 'Checklist', 'MachineDocument', 'GenericAccessory', 'SpecialAccessory',
        'MachineCategory', 'Machine', 'MachineGroup', 'Supplier', 'PasswordResetCode', 'AppUser',
    ):
        op.drop_table(table)
