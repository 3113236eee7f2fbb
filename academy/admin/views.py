from sqladmin import ModelView

from academy.group.models import Group
from academy.program.models import Program
from academy.user.models import User


class UserAdmin(ModelView, model=User):
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"

    column_list = [
        User.name,
        User.student_name,
        User.email,
        User.role,
        User.id,
        User.created_at,
    ]
    column_searchable_list = [User.email, User.name, User.student_name, User.id]
    column_sortable_list = [User.name, User.email, User.role, User.created_at]
    column_default_sort = [(User.created_at, True)]

    # Role changes must go through PUT /users/{id} so they reach Firebase
    # claims; primary keys are owned by reconciliation.
    form_excluded_columns = [User.id, User.role, User.created_at, User.updated_at]


class ProgramAdmin(ModelView, model=Program):
    name = "Program"
    name_plural = "Programs"
    icon = "fa-solid fa-chess-knight"

    column_list = [Program.title, Program.description, Program.created_at]
    column_searchable_list = [Program.title]
    column_sortable_list = [Program.title, Program.created_at]
    form_excluded_columns = [Program.groups, Program.created_at, Program.updated_at]


class GroupAdmin(ModelView, model=Group):
    name = "Group"
    name_plural = "Groups"
    icon = "fa-solid fa-people-group"

    column_list = [Group.name, Group.program, Group.created_at]
    column_searchable_list = [Group.name]
    column_sortable_list = [Group.name, Group.created_at]
    form_excluded_columns = [Group.members, Group.created_at, Group.updated_at]


ADMIN_VIEWS: list[type[ModelView]] = [UserAdmin, GroupAdmin, ProgramAdmin]
