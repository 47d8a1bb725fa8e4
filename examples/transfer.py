"""Example: Sign and send a SOL transfer, legacy and versioned"""

from solana_tx import (
    Cluster,
    Keypair,
    PublicKey,
    RpcClient,
    TransactionBuilder,
    VersionedTransactionBuilder,
)
from solana_tx.programs import ComputeBudgetProgram, MemoProgram, SystemProgram


def main():
    # Initialize client
    client = RpcClient(Cluster.DEVNET)

    payer = Keypair()
    recipient = PublicKey('GrDMoeqMLFjeXQ24H56S1RLgT4R76jsuWCd6SvXyGPQ5')
    print(f"Payer: {payer.public_key}")

    blockhash = client.get_latest_blockhash()

    # Legacy transaction: accounts are ordered automatically
    transaction = (
        TransactionBuilder()
        .add_instruction(ComputeBudgetProgram.set_compute_unit_price(1000))
        .add_instruction(SystemProgram.transfer(payer.public_key, recipient, 5000))
        .add_instruction(MemoProgram.write_utf8(payer.public_key, "hello"))
        .set_recent_blockhash(blockhash)
        .set_signers([payer])
        .build()
    )
    print(f"Legacy transaction: {len(transaction.serialize())} bytes")
    print(f"Signature: {client.send_transaction(transaction)}")

    # Versioned transaction: the fee payer is registered first
    versioned = (
        VersionedTransactionBuilder()
        .set_fee_payer(payer.public_key)
        .add_instruction(SystemProgram.transfer(payer.public_key, recipient, 5000))
        .set_recent_blockhash(blockhash)
        .set_signers([payer])
        .build()
    )
    print(f"Versioned transaction: {len(versioned.serialize())} bytes")
    print(f"Signature: {client.send_transaction(versioned)}")


if __name__ == '__main__':
    main()
