from pos.database import begin_write
from pos.models.products import Product


def test_reads_do_not_wait_for_an_open_write_transaction(session_factory, make_product, stock_of):
    pid = make_product(quantity=5)

    writer = session_factory()
    reader = session_factory()
    try:
        begin_write(writer)
        writer.query(Product).filter(Product.id == pid).update(
            {Product.quantity: 4}, synchronize_session=False
        )

        assert reader.query(Product.quantity).filter(Product.id == pid).scalar() == 5

        reader.rollback()
        writer.commit()
    finally:
        reader.close()
        writer.close()

    assert stock_of(pid) == 4


def test_begin_write_leaves_an_open_transaction_alone(session_factory, make_product):
    pid = make_product(quantity=5)

    with session_factory() as db:
        db.get(Product, pid)
        connection = db.connection()

        begin_write(db)

        assert db.connection() is connection
        assert db.in_transaction()
