import logging
from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.shortcuts import redirect, render
from django.urls import reverse

from apps.core.exceptions import PersistenceError, RecordValidationError, SchemaNotFound
from apps.core.gateway import get_gateway
from apps.core.schemas import lookup

from .forms import FilterForm, FormMode
from .services import TablePage

logger = logging.getLogger(__name__)


def table_page(view_func):
    """
    Resolve the table key from the URL into a TablePage.

    Unknown keys render an inline error page instead of raising.
    """
    @wraps(view_func)
    def wrapper(request, table_key, *args, **kwargs):
        try:
            schema = lookup(table_key)
        except SchemaNotFound as e:
            logger.warning(str(e))
            return render(request, 'crud/schema_missing.html', {'error': e}, status=404)

        page = TablePage(schema, get_gateway())
        return view_func(request, page, *args, **kwargs)

    return wrapper


def load_row(request, page, row_id):
    """Row by id, or None after queueing an error message"""
    try:
        row = page.gateway.fetch_one(page.table_name, row_id)
    except PersistenceError as e:
        messages.error(request, f'Fout bij laden van data: {e.message}')
        return None

    if row is None:
        messages.error(request, f'{page.schema.display_name} met id {row_id} niet gevonden')
    return row


@login_required
@table_page
def list_view(request, page):
    schema = page.schema
    related = page.related_options()

    filter_form = FilterForm(schema, related, data=request.GET or None)
    filters, search, sort = filter_form.query()

    rows = []
    try:
        rows = page.rows(filters=filters, search=search, sort=sort)
    except PersistenceError as e:
        messages.error(request, f'Fout bij laden van data: {e.message}')

    paginator = Paginator(rows, settings.CRUD_PAGE_SIZE)
    page_obj = paginator.get_page(request.GET.get('page'))

    query_params = request.GET.copy()
    query_params.pop('page', None)

    context = {
        'schema': schema,
        'table': page.table(page_obj.object_list, related),
        'filter_form': filter_form,
        'page_obj': page_obj,
        'total_rows': len(rows),
        'query_string': query_params.urlencode(),
    }

    return render(request, 'crud/list.html', context)


@login_required
@table_page
def create_view(request, page):
    schema = page.schema

    if request.method == 'POST':
        form = page.build_form(FormMode.CREATE, data=request.POST)
        try:
            page.submit(form)
            messages.success(request, f'{schema.display_name} toegevoegd')
            return redirect('crud:list', table_key=schema.key)
        except RecordValidationError as e:
            logger.info(str(e))
        except PersistenceError as e:
            messages.error(request, f'Fout bij opslaan van data: {e.message}')
    else:
        form = page.build_form(FormMode.CREATE)

    context = {
        'schema': schema,
        'form': form,
        'form_title': f'{schema.display_name} toevoegen',
        'cancel_url': reverse('crud:list', args=[schema.key]),
    }

    return render(request, 'crud/form.html', context)


@login_required
@table_page
def edit_view(request, page, row_id):
    schema = page.schema
    row = load_row(request, page, row_id)
    if row is None:
        return redirect('crud:list', table_key=schema.key)

    if request.method == 'POST':
        form = page.build_form(FormMode.EDIT, row=row, data=request.POST)
        try:
            page.submit(form, row_id=row_id)
            messages.success(request, f'{schema.display_name} bijgewerkt')
            return redirect('crud:list', table_key=schema.key)
        except RecordValidationError as e:
            logger.info(str(e))
        except PersistenceError as e:
            messages.error(request, f'Fout bij opslaan van data: {e.message}')
    else:
        form = page.build_form(FormMode.EDIT, row=row)

    context = {
        'schema': schema,
        'form': form,
        'row': row,
        'form_title': f'{schema.display_name} bewerken',
        'cancel_url': reverse('crud:list', args=[schema.key]),
    }

    return render(request, 'crud/form.html', context)


@login_required
@table_page
def detail_view(request, page, row_id):
    schema = page.schema
    row = load_row(request, page, row_id)
    if row is None:
        return redirect('crud:list', table_key=schema.key)

    context = {
        'schema': schema,
        'form': page.build_form(FormMode.VIEW, row=row),
        'row': row,
        'row_id': row_id,
    }

    return render(request, 'crud/detail.html', context)


@login_required
@table_page
def delete_view(request, page, row_id):
    """
    GET: confirmation page
    POST with confirmed=yes: delete and return to the list
    """
    schema = page.schema

    if request.method == 'POST':
        if request.POST.get('confirmed') != 'yes':
            messages.error(request, 'Verwijderen niet bevestigd')
            return redirect('crud:delete', table_key=schema.key, row_id=row_id)

        try:
            page.delete(row_id)
            messages.success(request, f'{schema.display_name} verwijderd')
        except PersistenceError as e:
            messages.error(request, f'Fout bij verwijderen van data: {e.message}')
        return redirect('crud:list', table_key=schema.key)

    row = load_row(request, page, row_id)
    if row is None:
        return redirect('crud:list', table_key=schema.key)

    context = {
        'schema': schema,
        'row': row,
        'row_id': row_id,
    }

    return render(request, 'crud/confirm_delete.html', context)
